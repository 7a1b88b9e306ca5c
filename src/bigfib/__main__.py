from bigfib.cli import main

raise SystemExit(main())
