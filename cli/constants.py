"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["list", "upload", "download", "delete", "uri", "stats", "login", "clear", "exit", "help"]

STYLE = Style.from_dict(
    {
        "prompt": "#F45935 bold",
        "command": "#0088ff bold",
    }
)

ACCENT = "\033[38;2;244;89;53m"
GREEN = "\033[32m"
RESET = "\033[0m"

LOGO = f"""{ACCENT}
   ___  _             _     ___      _
  / __|| |_  _  _ _ _| |__ |   \\ _ _(_)_ _____
 | (__ | ' \\| || | ' \\ / / | |) | '_| \\ V / -_)
  \\___||_||_|\\_,_|_||_\\_\\_\\|___/|_| |_|\\_/\\___|
{RESET}"""

WELCOME_TITLE = "ChunkDrive CLI - Named objects over a chunk channel"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "chunkdrive> "

HELP_TEXT = """Available commands:
  list                                List stored objects
  upload <file_path> [object_name]    Upload a local file (spaces in names become '_')
  download <object_name> [output]     Download an object (defaults to ./<object_name>)
  delete <object_name>...             Delete one or more objects
  uri <object_name>                   Show the chunk refs handed to external downloaders
  stats                               Show catalog totals (requires CDN on the gateway)
  login <username> <password>         Save Basic Auth credentials
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit REPL

Examples:
  upload ./report.pdf
  upload "./annual report.pdf" report-2024.pdf
  download report.pdf downloads/report.pdf
  delete report.pdf"""

DOWNLOAD_PIECE_SIZE = 64 * 1024
