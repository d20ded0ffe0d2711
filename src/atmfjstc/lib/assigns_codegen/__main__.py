import sys

from atmfjstc.lib.assigns_codegen.cli import main


if __name__ == '__main__':
    sys.exit(main())
