import nox

nox.options.reuse_existing_virtualenvs = True
nox.options.sessions = ["test"]


@nox.session
def test(session):
    """Run the test suite"""
    session.install(".[test]")
    session.run("pytest", *session.posargs)


@nox.session
def timings(session):
    """Time digesting a directory tree with treedigest-timings.py"""
    session.install(".")
    session.run("python", "treedigest-timings.py", *session.posargs)


@nox.session
def report2table(session):
    """Convert a report file to a table"""
    session.install("pydantic >= 2.0", "txtble ~= 0.12")
    session.run("python", "report2table.py", *session.posargs)
