from apirunner.cli import main

main()
