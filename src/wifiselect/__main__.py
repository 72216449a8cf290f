from wifiselect.cli import main

main()
