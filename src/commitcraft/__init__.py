"""
commitcraft

AI-proposed commit messages from the pending changes of a git repository.
"""

__version__ = "0.1.0"

# Conventional taxonomy offered to the models
COMMIT_TYPES = {
    "feat": "A new feature or capability",
    "fix": "A bug fix",
    "refactor": "Code restructuring without behavior change",
    "chore": "Maintenance tasks, dependencies, tooling",
    "docs": "Documentation only changes",
    "test": "Adding or updating tests",
    "style": "Formatting, whitespace, no code change",
    "perf": "Performance improvement",
    "ci": "CI/CD configuration changes",
    "build": "Build system or external dependency changes",
}
