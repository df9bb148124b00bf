from sitecheck.cli.main import main

main()
