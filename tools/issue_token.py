"""Print a bearer token for a user idx, signed with the configured JWT_SECRET.

    python tools/issue_token.py 1
"""
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from orange_market.core.config import settings
from orange_market.core.tokens import TokenCodec

if len(sys.argv) != 2 or not sys.argv[1].isdigit():
    sys.exit("usage: issue_token.py <user-idx>")

codec = TokenCodec.from_settings(settings)
print(codec.issue(int(sys.argv[1])))
