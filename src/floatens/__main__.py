from floatens.cli import main

main()
