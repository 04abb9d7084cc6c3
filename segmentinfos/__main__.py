from segmentinfos.cli import main

raise SystemExit(main())
