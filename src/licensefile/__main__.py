from licensefile.cli import main

raise SystemExit(main())
