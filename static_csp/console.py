class Colors:
    """ANSI color codes for terminal output"""
    RED = '\033[0;31m'
    GREEN = '\033[0;32m'
    YELLOW = '\033[1;33m'
    BLUE = '\033[0;34m'
    NC = '\033[0m'  # No Color


STATUS_PREFIXES = {
    "SUCCESS": Colors.GREEN + "✅ ",
    "ERROR": Colors.RED + "❌ ",
    "WARNING": Colors.YELLOW + "⚠️  ",
    "INFO": Colors.BLUE + "ℹ️  ",
}


def print_status(status: str, message: str) -> None:
    """Print a coloured status line prefixed with [static-csp]"""
    prefix = STATUS_PREFIXES.get(status, "")
    print(f"{prefix}[static-csp] {message}{Colors.NC if prefix else ''}")
