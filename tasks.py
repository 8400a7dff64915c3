""" Invoke tasks for assetserve. E.g. ``invoke tests --cover``.
"""

import os
import shutil

from invoke import task


ROOT_DIR = os.path.dirname(os.path.abspath(__file__))
LIBNAME = "assetserve"
PY_PATHS = [LIBNAME, "examples", "tests", "tasks.py", "setup.py"]

TEMP_DIRS = ("__pycache__", ".pytest_cache", "htmlcov", "build", "dist")


@task
def tests(ctx, cover=False):
    """Run the unit tests with coverage. Use --cover to show the html report."""
    ctx.run(f"pytest -v --cov={LIBNAME} --cov-report=term --cov-report=html tests")
    if cover:
        import webbrowser

        webbrowser.open(os.path.join(ROOT_DIR, "htmlcov", "index.html"))


@task
def lint(ctx):
    """Check for undefined names and such (using flake8)."""
    ctx.run("flake8 --select=F,E11 " + " ".join(PY_PATHS))


@task
def checkformat(ctx):
    """Check whether the code is formatted with black."""
    ctx.run("black --check " + " ".join(PY_PATHS))


@task
def autoformat(ctx):
    """Format the code with black."""
    ctx.run("black " + " ".join(PY_PATHS))


@task
def clean(ctx):
    """Remove caches, coverage output and build artifacts."""
    for root, dirs, files in os.walk(ROOT_DIR):
        for dname in list(dirs):
            if dname in TEMP_DIRS or dname.endswith(".egg-info"):
                shutil.rmtree(os.path.join(root, dname))
                dirs.remove(dname)
                print("Removed", os.path.join(root, dname))
        for fname in files:
            if fname.endswith((".pyc", ".pyo")) or fname == ".coverage":
                os.remove(os.path.join(root, fname))
                print("Removed", os.path.join(root, fname))
