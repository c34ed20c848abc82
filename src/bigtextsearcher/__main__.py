from bigtextsearcher.app import main

raise SystemExit(main())
