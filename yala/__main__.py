from yala.cli import main

raise SystemExit(main())
