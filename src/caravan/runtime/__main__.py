from caravan.runtime.bootstrap import main

raise SystemExit(main())
