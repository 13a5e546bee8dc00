from cargo_nro.cli import main

raise SystemExit(main())
