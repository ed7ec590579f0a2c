from zenuxs.cli import main

main()
