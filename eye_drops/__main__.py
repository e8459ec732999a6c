from eye_drops.app import main

main()
