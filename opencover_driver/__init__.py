"""
OpenCover Driver - Install and drive the OpenCover coverage engine.

Keeps a compatible OpenCover console installed locally and turns a test
project's coverage settings into an engine invocation.

Usage:
    opencover-driver install --app-data <dir>   # Install or upgrade the engine
    opencover-driver version --app-data <dir>   # Show the installed version
    opencover-driver args <config>              # Show the engine arguments
    opencover-driver run <config>               # Run coverage for a project
"""

__version__ = "0.1.0"
