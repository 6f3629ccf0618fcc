from taskdash.app import main

main()
