import os

def GetInputPath(filepath : str|None) -> str|None:
    """
    Normalize the input file path for cross-platform compatibility.

    Args:
        filepath: Input file path

    Returns:
        str: Normalized path preserving original extension
        None: If filepath is None
    """
    if not filepath:
        return None
    return os.path.normpath(filepath)

def GetBackupPath(filepath : str, extension : str = '.bak') -> str:
    """
    Path for a backup copy of a file, made by appending an extension to the full name (movie.srt -> movie.srt.bak)
    """
    extension = extension if extension.startswith('.') else f'.{extension}'
    return os.path.normpath(filepath) + extension

