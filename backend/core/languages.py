"""Supported editor languages and their remote runtimes"""

import enum
from typing import Dict, Tuple

class Language(str, enum.Enum):
    """Editor language enumeration"""
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    JAVA = "java"

DEFAULT_LANGUAGE = Language.JAVASCRIPT.value

# language -> (runtime name, runtime version) on the execution service
RUNTIMES: Dict[str, Tuple[str, str]] = {
    Language.JAVASCRIPT.value: ("javascript", "18.15.0"),
    Language.PYTHON.value: ("python", "3.10.0"),
    Language.JAVA.value: ("java", "15.0.2"),
}

FILE_NAMES: Dict[str, str] = {
    Language.JAVASCRIPT.value: "script.js",
    Language.PYTHON.value: "script.py",
    Language.JAVA.value: "Main.java",
}

def is_supported(language: str) -> bool:
    return language in RUNTIMES

def file_name_for(language: str) -> str:
    return FILE_NAMES.get(language, "script.txt")
