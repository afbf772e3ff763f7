from regery_webhook.app import main

main()
