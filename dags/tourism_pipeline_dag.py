"""
TourismInsight Pipeline DAG - UN Tourism CSV → Bronze → Silver → Gold
Schedule: Weekly, Monday 5:00 AM

Flow:
0. Health check (extracts present, DuckDB not unhealthy)
1. Load CSV extracts into bronze (truncate + reload)
2. Normalize bronze into silver (truncate + reload)
3. Silver quality gate
4. Rebuild gold star schema
5. Gold quality gate
6. Export gold to Parquet + back up DuckDB on MinIO
"""
from datetime import datetime, timedelta
from dataclasses import asdict
from airflow import DAG
from airflow.operators.python import PythonOperator
from airflow.operators.empty import EmptyOperator
import logging
import sys

sys.path.insert(0, '/opt/airflow')

logger = logging.getLogger(__name__)

DAG_ID = 'tourism_pipeline'

default_args = {
    'owner': 'airflow',
    'depends_on_past': False,
    'retries': 1,
    'retry_delay': timedelta(minutes=5),
    'email_on_failure': False,
}


def _metrics():
    from src.config import PG_CONN_STRING
    from src.monitoring import ETLMetricsLogger
    return ETLMetricsLogger(PG_CONN_STRING)


def health_check_task(**kwargs):
    """Check source extracts, DuckDB, MinIO and PostgreSQL before loading"""
    from src.monitoring import check_all_services

    result = check_all_services()
    logger.info(f"Health check: {result['overall']}")
    for service, status in result['services'].items():
        if status.get('status') == 'unhealthy':
            logger.error(f"  {service}: {status.get('error', 'unhealthy')}")
        else:
            logger.info(f"  {service}: {status.get('status')}")

    # Degraded services (no warehouse yet, no monitoring DB) do not block a load
    if result['services']['duckdb'].get('status') == 'unhealthy':
        raise Exception(f"DuckDB unhealthy: {result['services']['duckdb'].get('error')}")
    if result['services']['extracts'].get('status') == 'unhealthy':
        raise Exception(f"No source extracts in {result['services']['extracts'].get('data_dir')}")
    return result['overall']


def bronze_task(**kwargs):
    """Load CSV extracts into bronze"""
    from src.config import DATA_DIR
    from src.etl.bronze import load_bronze
    from src.storage import get_duckdb_connection

    with _metrics().track(DAG_ID, 'bronze', kwargs.get('run_id')) as m:
        with get_duckdb_connection() as conn:
            result = load_bronze(conn, DATA_DIR)
        m.record_result(result)

    if result['skipped']:
        logger.warning(f"Missing extracts: {result['skipped']}")
    return {'total_rows': result.get('total_rows', 0), 'skipped': result['skipped']}


def silver_task(**kwargs):
    """Normalize bronze into silver"""
    from src.etl.silver import run_silver_pipeline
    from src.storage import get_duckdb_connection

    with _metrics().track(DAG_ID, 'silver', kwargs.get('run_id')) as m:
        with get_duckdb_connection() as conn:
            result = run_silver_pipeline(conn)
        m.record_result(result)

    return {'total_rows': result.get('total_rows', 0), 'tables': result['tables']}


def _quality_task(layer: str, run_id: str = None):
    from src.config import PG_CONN_STRING
    from src.quality import GoldValidator, MetricsLogger, QualityGate, SilverValidator
    from src.storage import get_duckdb_connection

    validator = GoldValidator() if layer == 'gold' else SilverValidator()
    with get_duckdb_connection() as conn:
        validation = validator.validate(conn)

    # Hard fail raises ValidationHardFailError and fails the task
    gate = QualityGate().evaluate(validation)
    MetricsLogger(PG_CONN_STRING).log(validation, gate, dag_run_id=run_id)
    logger.info(f"{layer} gate: {gate.status} - {gate.message}")
    return asdict(gate)


def quality_silver_task(**kwargs):
    """Silver quality gate"""
    return _quality_task('silver', kwargs.get('run_id'))


def gold_task(**kwargs):
    """Rebuild gold star schema"""
    from src.etl.gold import run_gold_pipeline
    from src.storage import get_duckdb_connection

    with _metrics().track(DAG_ID, 'gold', kwargs.get('run_id')) as m:
        with get_duckdb_connection() as conn:
            result = run_gold_pipeline(conn)
        m.record_result(result)

    return result['row_counts']


def quality_gold_task(**kwargs):
    """Gold quality gate"""
    return _quality_task('gold', kwargs.get('run_id'))


def export_task(**kwargs):
    """Export gold to Parquet and back up DuckDB"""
    from src.config import DUCKDB_PATH
    from src.storage import backup_duckdb, export_gold_parquet, get_duckdb_connection

    with _metrics().track(DAG_ID, 'export', kwargs.get('run_id')):
        with get_duckdb_connection() as conn:
            export = export_gold_parquet(conn)
        backup = backup_duckdb(DUCKDB_PATH)

    if not export['success']:
        raise Exception(f"Parquet export failed: {export.get('error')}")
    return {'exported_tables': list(export['tables']), 'backup_object': backup}


with DAG(
    DAG_ID,
    default_args=default_args,
    description='UN Tourism CSV → bronze → silver → gold warehouse',
    schedule_interval='0 5 * * 1',  # Monday 5:00 AM
    start_date=datetime(2024, 1, 1),
    catchup=False,
    tags=['production', 'etl', 'tourism'],
    max_active_runs=1,
) as dag:

    start = EmptyOperator(task_id='start')

    health_check = PythonOperator(
        task_id='health_check',
        python_callable=health_check_task,
    )

    bronze = PythonOperator(
        task_id='bronze',
        python_callable=bronze_task,
    )

    silver = PythonOperator(
        task_id='silver',
        python_callable=silver_task,
    )

    quality_silver = PythonOperator(
        task_id='quality_silver',
        python_callable=quality_silver_task,
    )

    gold = PythonOperator(
        task_id='gold',
        python_callable=gold_task,
    )

    quality_gold = PythonOperator(
        task_id='quality_gold',
        python_callable=quality_gold_task,
    )

    export = PythonOperator(
        task_id='export',
        python_callable=export_task,
    )

    end = EmptyOperator(task_id='end')

    start >> health_check >> bronze >> silver >> quality_silver >> gold >> quality_gold >> export >> end
