from __future__ import annotations

import json
import sys
from typing import List, Optional

from livesurf.client import LiveSurfClient
from livesurf.config_models import load_and_validate_config
from livesurf.core.errors import ConfigError, LiveSurfError
from livesurf.core.models import HttpMethod
from livesurf.utils.logging import setup_logging

USAGE = "Usage: livesurf configs/client.yaml <GET|POST|PATCH|DELETE> <endpoint> [json-body]"


def run_one(config_path: str, method: str, endpoint: str, raw_body: Optional[str] = None) -> object:
    """Perform a single request using the client described by `config_path`."""
    config = load_and_validate_config(config_path)
    body = json.loads(raw_body) if raw_body else None

    with LiveSurfClient.from_config(config) as client:
        return client.request(method, endpoint, body)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the livesurf command."""
    args = sys.argv[1:] if argv is None else argv
    if len(args) < 3 or len(args) > 4:
        print(USAGE)
        raise SystemExit(2)

    config_path, method, endpoint = args[:3]
    if method.upper() not in HttpMethod.__members__:
        print(f"Error: unsupported method {method!r}")
        print(USAGE)
        raise SystemExit(2)

    setup_logging("configs/logging.yaml")
    try:
        result = run_one(config_path, method, endpoint, args[3] if len(args) == 4 else None)
    except json.JSONDecodeError as e:
        print(f"Error: body is not valid JSON: {e}")
        raise SystemExit(2)
    except (ConfigError, FileNotFoundError) as e:
        print(f"Error: {e}")
        raise SystemExit(2)
    except LiveSurfError as e:
        print(f"Error: {e}")
        raise SystemExit(1)

    if isinstance(result, str):
        print(result)
    else:
        print(json.dumps(result, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
