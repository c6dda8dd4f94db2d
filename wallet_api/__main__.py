from wallet_api.server import main

main()
