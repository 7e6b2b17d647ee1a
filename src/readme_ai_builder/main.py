from logging import Logger
from typing import Literal

import click
from fastmcp import FastMCP
from fastmcp.server.middleware.logging import LoggingMiddleware
from fastmcp.utilities.logging import configure_logging, get_logger

from readme_ai_builder.servers.readme import ReadmeServer

logger: Logger = get_logger(name=__name__)

mcp: FastMCP[None] = FastMCP[None](name="README AI Builder")

mcp.add_middleware(middleware=LoggingMiddleware(include_payloads=True, logger=logger))

readme_server: ReadmeServer = ReadmeServer(logger=logger)
_ = readme_server.register_tools(fastmcp=mcp)


@click.command()
@click.option(
    "--mcp-transport",
    type=click.Choice(["stdio", "streamable-http"]),
    default="stdio",
    help="The transport to run the MCP server on",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    default="INFO",
    help="The level to log at",
)
def run_mcp(mcp_transport: Literal["stdio", "streamable-http"], log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"]):
    configure_logging(level=log_level)

    mcp.run(transport=mcp_transport)


if __name__ == "__main__":
    run_mcp()
