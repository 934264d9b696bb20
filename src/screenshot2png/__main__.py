from screenshot2png.main import main

if __name__ == "__main__":
    main()
