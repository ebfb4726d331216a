import sys

from lcbook.main import main


sys.exit(main())
