from pash.main import main

main()
