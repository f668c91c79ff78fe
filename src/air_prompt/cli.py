#!/usr/bin/env python3

import sys
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv

from . import configure_logging, get_logger
from .client import AirClient
from .config import parse_frontmatter
from .errors import (
    AirError,
    CircularIncludeError,
    ConfigError,
    FileReadError,
    GenerationError,
    MissingVariablesError,
    PathEscapeError,
    PathResolutionError,
)
from .providers import DEFAULT_PROVIDER, get_supported_providers
from .schema import format_response
from .template import (
    environment_variables,
    expand_file,
    find_placeholders,
    merge_variables,
    substitute_variables,
)

logger = get_logger(__name__)

EXIT_CODES = {
    PathEscapeError: 3,
    CircularIncludeError: 4,
    FileReadError: 5,
    MissingVariablesError: 6,
    PathResolutionError: 7,
    ConfigError: 8,
    GenerationError: 9,
}


def exit_code_for(error: AirError) -> int:
    """Map an error to the process exit code for its kind."""
    for error_type, code in EXIT_CODES.items():
        if isinstance(error, error_type):
            return code
    return 1


def parse_var_options(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str]:
    """Parse repeated ``KEY=VALUE`` options; later definitions win."""
    variables: dict[str, str] = {}
    for definition in values:
        name, sep, value = definition.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"invalid format: {definition} (expected key=value)")
        variables[name] = value
    return variables


def render_prompt(template_file: str, cli_variables: dict[str, str]):
    """Expand, configure and substitute a template file.

    Returns:
        Tuple of (config, prompt text)
    """
    content = expand_file(template_file)
    config, body = parse_frontmatter(content)
    config.validate()

    # Precedence: CLI > frontmatter > environment
    variables = merge_variables(environment_variables(), config.variables, cli_variables)
    logger.debug(
        "Variables: %d from frontmatter, %d from --var",
        len(config.variables),
        len(cli_variables),
    )
    defaulted = sorted(
        {p.name for p in find_placeholders(body) if p.has_default and p.name not in variables}
    )
    if defaulted:
        logger.debug("Using defaults for: %s", ", ".join(defaulted))
    return config, substitute_variables(body, variables)


def write_output(text: str, output: Optional[str]) -> None:
    if output is None:
        click.echo(text)
        return
    path = Path(output)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
    except OSError as e:
        raise AirError(f"cannot write output to {path}: {e.strerror or e}") from e
    logger.info("Wrote response to %s", path)


@click.command()
@click.argument("template_file", type=click.Path(dir_okay=False))
@click.option(
    "-v",
    "--var",
    "variables",
    multiple=True,
    callback=parse_var_options,
    metavar="KEY=VALUE",
    help="Set a template variable (repeatable, overrides frontmatter and environment)",
)
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Write the response to a file")
@click.option(
    "--provider",
    type=click.Choice(get_supported_providers()),
    default=DEFAULT_PROVIDER,
    help="LLM provider to use",
)
@click.option("-m", "--model", help="Model name (overrides the frontmatter model)")
@click.option("-t", "--token", help="API token for the selected provider")
@click.option("--base-url", help="Base URL for API (auto-detected or custom)")
@click.option("--dry-run", is_flag=True, help="Print the rendered prompt without calling the API")
@click.option("--verbose", is_flag=True, help="Show debug output and token usage")
def main(
    template_file: str,
    variables: dict[str, str],
    output: Optional[str],
    provider: str,
    model: Optional[str],
    token: Optional[str],
    base_url: Optional[str],
    dry_run: bool,
    verbose: bool,
) -> None:
    """Render a markdown prompt template and send it to an LLM.

    TEMPLATE_FILE: Markdown template, optionally with YAML frontmatter
    """
    configure_logging(verbose)
    load_dotenv(dotenv_path=".env")

    try:
        config, prompt = render_prompt(template_file, variables)

        if dry_run:
            write_output(prompt, output)
            return

        if model:
            config.model = model

        client = AirClient(provider=provider, api_key=token, base_url=base_url, verbose=verbose)
        result = client.generate(prompt, config)

        if verbose:
            logger.info(
                "Used tokens: input=%d output=%d",
                result.usage.get("prompt_tokens", 0),
                result.usage.get("completion_tokens", 0),
            )

        text = result.text
        if config.response_schema is not None:
            text = format_response(text)
        write_output(text, output)

    except AirError as e:
        logger.error("Error: %s", e)
        sys.exit(exit_code_for(e))


if __name__ == "__main__":
    main()
