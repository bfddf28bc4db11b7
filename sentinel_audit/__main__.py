from sentinel_audit.cli import main

raise SystemExit(main())
