"""Language catalogue — custom rule languages with their id tags and file globs."""

from __future__ import annotations

from typing import Dict, List, Optional

# Custom rules are only matched for these languages; the value is the tag
# every rule id of that language must carry (HS-<TAG>-<n>).
CUSTOM_RULE_LANGUAGE_TAGS: Dict[str, str] = {
    "Leaks": "LEAKS",
    "C#": "CSHARP",
    "Dart": "DART",
    "Java": "JAVA",
    "Kotlin": "KOTLIN",
    "Yaml": "KUBERNETES",
    "JavaScript": "JAVASCRIPT",
    "Nginx": "NGINX",
    "Swift": "SWIFT",
}

# Files a custom rule of each language is matched against.
LANGUAGE_FILE_GLOBS: Dict[str, List[str]] = {
    "Leaks": ["*"],
    "C#": ["*.cs", "*.cshtml", "*.config"],
    "Dart": ["*.dart"],
    "Java": ["*.java"],
    "Kotlin": ["*.kt", "*.kts"],
    "Yaml": ["*.yaml", "*.yml"],
    "JavaScript": ["*.js", "*.jsx", "*.mjs", "*.cjs", "*.ts", "*.tsx"],
    "Nginx": ["nginx.conf", "*.nginx", "*.conf"],
    "Swift": ["*.swift"],
}


def tag_for(language: str) -> Optional[str]:
    """Return the rule id tag for *language*, or None if unsupported."""
    return CUSTOM_RULE_LANGUAGE_TAGS.get(language)


def file_globs_for(language: str) -> List[str]:
    return LANGUAGE_FILE_GLOBS.get(language, [])
