from relbump.cli.app import main

main()
