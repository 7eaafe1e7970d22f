# blog/tasks/cli.py
"""Blog CLI: operational one-shot commands.

Commands:
    backup         Dump posts, projects and researches to timestamped JSON files.
    qa             Probe the database end to end and write a JSON report.
    bundle-size    Report the size of the static assets.
    new-post       Create a markdown draft from a post template.
    insert-post    Insert a markdown draft (with frontmatter) into the posts table.

Environment:
    DATABASE_URL     SQLAlchemy URL of the blog database.
    BACKUP_DIR       Default backup output directory.
    QA_REPORT_PATH   Default QA report path.
"""

import logging
from pathlib import Path

import typer

from blog.config import BACKUP_DIR, BUNDLE_WARN_KB, LOG_LEVEL, QA_REPORT_PATH, SITE_URL, STATIC_DIR
from blog.errors import ConstraintError, StoreError
from blog.services.store import DataStore
from blog.tasks import backend_qa, backup, bundle_size, posts

logging.basicConfig(level=LOG_LEVEL)

app = typer.Typer(add_completion=False, no_args_is_help=True)

RULE = "─" * 80


def get_store() -> DataStore:
    """Store for the configured DATABASE_URL. Imported lazily so file-only commands need no database."""
    from blog.database import engine
    from blog.services.store import SqlDataStore

    return SqlDataStore(engine)


@app.command("backup")
def backup_command(output_dir: Path = typer.Argument(Path(BACKUP_DIR), help="Directory to create the backup in.")) -> None:
    """Dump every table to <output_dir>/backup-<timestamp>/."""
    typer.echo("Starting database backup...")
    try:
        backup_dir = backup.backup_database(get_store(), output_dir)
    except StoreError as ex:
        typer.echo(f"Backup failed: {ex}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Backup completed: {backup_dir}")


@app.command("qa")
def qa_command(report: Path = typer.Option(Path(QA_REPORT_PATH), help="Where to write the JSON report.")) -> None:
    """Run the backend QA checks against the configured database."""
    typer.echo("Starting backend QA checks")
    typer.echo(RULE)
    results = backend_qa.run_qa(get_store())
    typer.echo(RULE)
    typer.echo(f"Passed: {len(results.passed)}")
    typer.echo(f"Failed: {len(results.failed)}")
    typer.echo(f"Warnings: {len(results.warnings)}")
    path = backend_qa.write_report(results, report)
    typer.echo(f"Results saved to: {path}")
    if results.failed:
        typer.echo("Some checks failed. Review the failed checks above.")
        raise typer.Exit(code=1)
    typer.echo("All backend QA checks passed!")


@app.command("bundle-size")
def bundle_size_command(
    directory: Path = typer.Argument(STATIC_DIR, help="Directory of built static assets."),
    threshold_kb: int = typer.Option(BUNDLE_WARN_KB, help="Flag assets larger than this many KB."),
) -> None:
    """List the largest JS/CSS assets with raw and gzip sizes."""
    try:
        report = bundle_size.analyze_bundles(directory, threshold_kb)
    except FileNotFoundError:
        typer.echo(f"{directory} not found. Build the static assets first.", err=True)
        raise typer.Exit(code=1)

    typer.echo("Bundle Size Analysis")
    typer.echo(RULE)
    for asset in report.assets:
        status = "LARGE" if asset.is_large else "ok"
        typer.echo(
            f"{status:<6} {asset.name:<30} {bundle_size.format_size(asset.size):<12} "
            f"(gzip: {bundle_size.format_size(asset.gzip_size)})"
        )
    typer.echo(RULE)
    typer.echo(f"Total files analyzed: {report.total_files}")
    typer.echo(f"Total size: {bundle_size.format_size(report.total_size)}")
    typer.echo(f"Total gzipped: {bundle_size.format_size(report.total_gzip_size)}")
    typer.echo(f"Large assets (>{report.threshold_kb}KB): {report.large_count}")
    if report.large_count:
        typer.echo("Recommendations:")
        typer.echo("  - Split large scripts so each page loads only what it uses")
        typer.echo("  - Drop unused CSS rules and vendored libraries")
        typer.echo("  - Defer non-critical scripts")
    else:
        typer.echo("Asset sizes are within acceptable limits!")


@app.command("new-post")
def new_post_command(
    template: str = typer.Argument(..., help=f"One of: {', '.join(posts.TEMPLATES)}"),
    slug: str = typer.Argument(..., help="File name (without .md) and default URL slug."),
    title: str = typer.Argument(..., help="Post title substituted into the template."),
    output_dir: Path = typer.Option(Path("."), help="Where to write <slug>.md."),
) -> None:
    """Create <slug>.md from a post template."""
    try:
        path = posts.create_post_file(template, slug, title, output_dir)
    except posts.UnknownTemplateError:
        typer.echo(f'Template "{template}" not found.', err=True)
        typer.echo(f"Available templates: {', '.join(posts.TEMPLATES)}", err=True)
        raise typer.Exit(code=1)
    except FileExistsError:
        typer.echo(f'File "{slug}.md" already exists. Use a different slug or remove the existing file.', err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Post created: {path}")
    typer.echo(f"Template: {template}")
    typer.echo(f"Next: edit the file, then run `blog insert-post {path}`")


@app.command("insert-post")
def insert_post_command(file: Path = typer.Argument(..., help="Markdown file with frontmatter.")) -> None:
    """Insert a markdown post into the posts table."""
    if not file.is_file():
        typer.echo(f"File not found: {file}", err=True)
        raise typer.Exit(code=1)
    try:
        data = posts.extract_post_data(file.read_text(encoding="utf-8"))
    except ValueError as ex:
        typer.echo(f"Invalid frontmatter: {ex}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Inserting post: {data['slug']} ({data['title']})")
    try:
        row = get_store().insert("posts", data)
    except ConstraintError as ex:
        typer.echo(f"Error inserting post: {ex}", err=True)
        raise typer.Exit(code=1)
    except StoreError as ex:
        typer.echo(f"Database error: {ex}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Post inserted: id={row['id']} views={row['view_count']}")
    typer.echo(f"URL: {SITE_URL}/blog/{row['slug']}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
