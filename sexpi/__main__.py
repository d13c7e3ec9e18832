from sexpi.main import main

main()
