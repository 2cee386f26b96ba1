from dataterm.cli import main

raise SystemExit(main())
