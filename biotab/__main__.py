from . import cli

# Provide a single top-level interface to all of the functionality, so that
# "python -m biotab" works the same as the installed console script.
if __name__ == "__main__":
    cli.biotab_main()
