from .orchestrator import main

raise SystemExit(main())
