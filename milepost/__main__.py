from milepost.interfaces.cli.main import main

main()
