import sys
import importlib.util

def check_required_imports(modules: list[str], pip_extras: str|None = None) -> None:
    """Exit with an installation hint if any of the modules cannot be imported"""
    missing_modules = [ module_name for module_name in modules if importlib.util.find_spec(module_name) is None ]

    if missing_modules:
        print(f"Error: Required modules not found: {', '.join(missing_modules)}", file=sys.stderr)
        if pip_extras:
            print(f"Please run `pip install .[{pip_extras}]`", file=sys.stderr)
        else:
            print("Please run `pip install .`", file=sys.stderr)
        sys.exit(1)
