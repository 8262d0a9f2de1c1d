# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
import sys

from tossgen.cli import main

sys.exit(main())
