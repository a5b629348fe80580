from schemelin.main import main

main()
