from mcpconductor.cli.manage import run

if __name__ == "__main__":
    run()
