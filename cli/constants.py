"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = [
    "token", "logout", "config", "upload", "node", "nodes", "acl",
    "attrs", "rename", "delete", "clear", "exit", "help",
]

PATH_COMMANDS = ("upload",)

STYLE = Style.from_dict(
    {
        "prompt": "#2E8B57 bold",
        "command": "#0088ff bold",
    }
)

GREEN = "\033[38;2;46;139;87m"
RESET = "\033[0m"

LOGO = f"""{GREEN}
 ███████╗██╗  ██╗ ██████╗  ██████╗██╗  ██╗
 ██╔════╝██║  ██║██╔═══██╗██╔════╝██║ ██╔╝
 ███████╗███████║██║   ██║██║     █████╔╝
 ╚════██║██╔══██║██║   ██║██║     ██╔═██╗
 ███████║██║  ██║╚██████╔╝╚██████╗██║  ██╗
 ╚══════╝╚═╝  ╚═╝ ╚═════╝  ╚═════╝╚═╝  ╚═╝
{RESET}"""

WELCOME_TITLE = "Shock CLI - resumable uploads to the object store"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "shock> "

HELP_TEXT = """Available commands:
  token <token>                            Store the OAuth token used for requests
  logout                                   Forget the stored token
  config [<key> <value>]                   Show configuration, or set shock_url/chunk_size/timeout
  upload <path> [--resume] [--node <id>]   Upload a file in chunks (Ctrl-C cancels after the current chunk)
  node <id>                                Show a node and its attributes
  nodes [key=value ...] [--limit N] [--offset N] [--owner NAME]
                                           Search nodes by attribute (no filters = all visible nodes)
  acl <id>                                 Show a node's access control lists
  attrs <id> key=value [key=value ...]     Replace a node's attributes
  rename <id> <file_name>                  Change the file name stored on a node
  delete <id>                              Delete a node
  clear                                    Clear screen and redisplay welcome message
  help                                     Show this help
  exit                                     Exit REPL

Examples:
  config shock_url https://shock.example.org/services/shock-api
  token AB12CD34EF
  upload data/reads.fastq --resume
  upload data/reads.fastq --node 5f1c2a9e-8d0b-4a53-9e0e-1b2c3d4e5f60
  nodes file_name=reads.fastq --limit 5
  rename 5f1c2a9e-8d0b-4a53-9e0e-1b2c3d4e5f60 reads_run2.fastq"""

CONFIG_KEYS = ("shock_url", "chunk_size", "timeout")
