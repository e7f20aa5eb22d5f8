# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import argparse
import asyncio
import logging
import os
from typing import List, Optional

from .config import DEFAULT_CONFIG_FILENAME, ModuleOptions, load_options
from .exceptions import GraphQLServerError
from .host import LocalHost
from .module import GraphQLServerModule
from .utils.logging_utils import configure_split_stream_logging
from .watcher import SchemaWatcher

logger = logging.getLogger(__name__)

DEFAULT_OUT_DIR = ".graphql"


def _load_module_options(config_path: Optional[str], root_dir: str) -> ModuleOptions:
    if config_path:
        return load_options(config_path)

    default_path = os.path.join(root_dir, DEFAULT_CONFIG_FILENAME)
    if os.path.isfile(default_path):
        return load_options(default_path)

    logger.debug("No %s in %s, using default options", DEFAULT_CONFIG_FILENAME, root_dir)
    return ModuleOptions()


def _create_module(args: argparse.Namespace, dev: bool) -> GraphQLServerModule:
    root_dir = os.path.abspath(args.root)
    options = _load_module_options(args.config, root_dir)
    host = LocalHost(root_dir, args.out_dir, dev=dev)
    module = GraphQLServerModule(options, host)
    module.setup()
    return module


def build(args: argparse.Namespace) -> int:
    module = _create_module(args, dev=False)
    module.on_ready()
    for path in module.host.write_templates():
        logger.info("Wrote %s", path)
    return 0


async def _watch(module: GraphQLServerModule) -> None:
    module.on_ready()
    module.host.write_templates()

    watcher = SchemaWatcher(module, module.host.root_dir, asyncio.get_running_loop())
    watcher.start()
    try:
        await asyncio.Event().wait()
    finally:
        watcher.stop()


def watch(args: argparse.Namespace) -> int:
    module = _create_module(args, dev=True)
    try:
        asyncio.run(_watch(module))
    except KeyboardInterrupt:
        logger.info("Stopped watching")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="graphql-server-codegen",
        description="Generate a schema module and typed resolver stubs from GraphQL SDL files",
    )
    parser.add_argument("--config", default=None, help=f"Options file (default: <root>/{DEFAULT_CONFIG_FILENAME})")
    parser.add_argument("--root", default=".", help="Project root that schema patterns are resolved against")
    parser.add_argument(
        "--out-dir", default=DEFAULT_OUT_DIR, help=f"Output directory, relative to the root (default: {DEFAULT_OUT_DIR})"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("build", help="Generate the artifacts once").set_defaults(func=build)
    subparsers.add_parser("watch", help="Generate, then regenerate on schema changes").set_defaults(func=watch)

    args = parser.parse_args(argv)

    configure_split_stream_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        formatter=logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"),
    )

    try:
        return args.func(args)
    except GraphQLServerError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
