from toolchat.main import main

raise SystemExit(main())
