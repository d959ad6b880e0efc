from dincheck.cli import main

raise SystemExit(main())
