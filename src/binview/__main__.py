from binview.cli import main

raise SystemExit(main())
