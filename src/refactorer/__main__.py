from refactorer.cli import main

raise SystemExit(main())
