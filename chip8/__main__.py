from chip8.frontend import main

main()
