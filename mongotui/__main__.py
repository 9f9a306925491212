from mongotui.cli import main

raise SystemExit(main())
