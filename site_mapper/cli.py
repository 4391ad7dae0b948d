# === FILE: site_mapper/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска SiteMapper через командную строку.

Команды:
  crawl URL         Обойти сайт и вывести/сохранить результат и sitemap.xml
  sitemap FILE      Сгенерировать sitemap.xml из JSON-запроса {baseUrl, pages, ...}
  sample BASE_URL   Сгенерировать пример sitemap.xml для BASE_URL
  config            Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (только консоль, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --max-depth N       Глубина обхода (1-10)
  --max-pages N       Лимит страниц (1-200)
  --json PATH         Сохранить JSON-отчёт в файл
  --html PATH         Сохранить HTML-отчёт в файл
  --template DIR      Папка с Jinja2-шаблонами
  --sitemap PATH      Сохранить sitemap.xml по результатам обхода
  --changefreq FREQ   changefreq для всех записей sitemap
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --crawl-timeout SEC Таймаут всего обхода (секунд)
  --fallback-sample   При ошибке обхода выдать пример sitemap вместо ошибки

Дополнительно:
  --version, -v       Показать версию SiteMapper

Пример:
  site-mapper crawl https://example.com --max-depth 2 --max-pages 50 --sitemap sitemap.xml
"""
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError as PydanticValidationError

from site_mapper import __version__
from site_mapper.api import handle_sample_sitemap, handle_sitemap_generation
from site_mapper.config import load_config
from site_mapper.crawler.models import CrawlRequest
from site_mapper.engine import start_crawl
from site_mapper.errors import SiteMapperError, ValidationError
from site_mapper.logger import init_logging
from site_mapper.report.html_report import render_html
from site_mapper.report.json_report import render_json
from site_mapper.sitemap import CHANGEFREQ_VALUES, generate_sitemap

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str, code: int = 1):
    click.secho(message, fg='red', err=True)
    sys.exit(code)


def _emit_xml(xml: str, output: Optional[Path]) -> None:
    if output is None:
        click.echo(xml, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(xml, encoding='utf-8')
    click.echo(f'Sitemap: {output}')


def _fallback(url: str, reason: str, sitemap_output: Optional[Path]) -> None:
    click.secho(f'{reason}; используется пример sitemap', fg='yellow', err=True)
    response = handle_sample_sitemap(url)
    if not response.ok:
        print_error(f'Ошибка генерации примера: {response.body["error"]}')
    _emit_xml(response.body['data']['xml'], sitemap_output)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteMapper, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default=None,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования (по умолчанию из конфига)'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (только консоль, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд SiteMapper CLI."""
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    init_logging(
        level=log_level or cfg.log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--max-depth', '-d', 'max_depth', type=int, default=None, help='Глубина обхода (1-10)')
@click.option('--max-pages', '-n', 'max_pages', type=int, default=None, help='Лимит страниц (1-200)')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблонами (по умолчанию встроенный шаблон)'
)
@click.option(
    '--sitemap', '-s', 'sitemap_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить sitemap.xml по результатам обхода'
)
@click.option('--changefreq', type=click.Choice(CHANGEFREQ_VALUES), default=None, help='changefreq для всех записей')
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.option('--crawl-timeout', 'crawl_timeout', type=float, default=None, help='Таймаут всего обхода (секунд)')
@click.option('--fallback-sample', is_flag=True, help='При ошибке обхода выдать пример sitemap')
@click.pass_context
def crawl(ctx, url, max_depth, max_pages, json_output, html_output, template_dir,
          sitemap_output, changefreq, pretty, crawl_timeout, fallback_sample):
    """Обойти сайт начиная с URL и сгенерировать отчёты."""
    cfg = ctx.obj['config']
    try:
        request = CrawlRequest(
            url=url,
            max_depth=max_depth if max_depth is not None else cfg.max_depth,
            max_pages=max_pages if max_pages is not None else cfg.max_pages,
        )
    except PydanticValidationError as e:
        print_error(f'Некорректный запрос: {e}', code=2)

    try:
        report = asyncio.run(
            asyncio.wait_for(start_crawl(request, cfg), timeout=crawl_timeout)
        )
    except asyncio.TimeoutError:
        reason = f'Обход не завершён за {crawl_timeout} секунд'
        if fallback_sample:
            return _fallback(request.url, reason, sitemap_output)
        print_error(reason)
    except Exception as e:
        if fallback_sample:
            return _fallback(request.url, f'Ошибка при обходе: {e}', sitemap_output)
        print_error(f'Ошибка при обходе: {e}')

    if sitemap_output:
        try:
            xml = generate_sitemap(report.to_sitemap_entries(changefreq))
        except ValidationError as e:
            if fallback_sample:
                return _fallback(request.url, f'Sitemap не сгенерирован: {e}', sitemap_output)
            print_error(f'Sitemap не сгенерирован: {e}')
        except SiteMapperError as e:
            print_error(f'Ошибка генерации sitemap: {e}')
        _emit_xml(xml, sitemap_output)

    if json_output:
        try:
            saved_json = render_json(report, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')

    # Без файлов вывода печатаем ответ в stdout
    if not (json_output or html_output or sitemap_output):
        envelope = {'success': True, 'data': report.to_dict()}
        click.echo(json.dumps(envelope, ensure_ascii=False, indent=2 if pretty else None))


@cli.command('sitemap', context_settings=CONTEXT_SETTINGS)
@click.argument('request_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    '--output', '-o', 'output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Файл для sitemap.xml (stdout, если не указан)'
)
def sitemap(request_file, output):
    """Сгенерировать sitemap.xml из JSON-запроса {baseUrl, pages, include*}."""
    try:
        payload = json.loads(request_file.read_text(encoding='utf-8'))
    except json.JSONDecodeError as e:
        print_error(f'Неправильный JSON в {request_file}: {e}', code=2)

    response = handle_sitemap_generation(payload)
    if not response.ok:
        details = response.body.get('details') or []
        message = '\n'.join([response.body['error'], *(f'  - {d}' for d in details)])
        print_error(message, code=2 if response.status < 500 else 1)
    _emit_xml(response.body['data']['xml'], output)


@cli.command('sample', context_settings=CONTEXT_SETTINGS)
@click.argument('base_url')
@click.option(
    '--output', '-o', 'output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Файл для sitemap.xml (stdout, если не указан)'
)
def sample(base_url, output):
    """Сгенерировать пример sitemap.xml для BASE_URL."""
    response = handle_sample_sitemap(base_url)
    if not response.ok:
        print_error(response.body['error'], code=2)
    _emit_xml(response.body['data']['xml'], output)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
