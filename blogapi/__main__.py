from blogapi.main import main

main()
