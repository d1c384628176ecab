import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]

# psycopg2 ships a compiled extension; a cached wheel may target another interpreter.
_C_EXT_PACKAGES = ["psycopg2-binary"]

nox.options.sessions = ["tests"]


def _install(session: nox.Session) -> None:
    """Install storefront and its test extra into the nox virtualenv."""
    session.run("poetry", "install", "--extras", "test", external=True)
    session.run("pip", "install", "--force-reinstall", "--no-cache-dir", *_C_EXT_PACKAGES)


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Whole suite on every supported interpreter."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_domain(session: nox.Session) -> None:
    """Domain records only: no unit of work, no HTTP."""
    _install(session)
    session.run("pytest", "-m", "domain", *session.posargs)


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_fast(session: nox.Session) -> None:
    """Everything except the HTTP and SQL adapter tests."""
    _install(session)
    session.run("pytest", "-m", "not slow", *session.posargs)
