# app.py

import click
import structlog
from flask import Flask, abort, flash, redirect, render_template, request, url_for

from employee_manager import config
from employee_manager.log import configure_logging
from employee_manager.repository import (
    ConnectionFailure,
    EmployeeRepository,
    QueryFailed,
    mysql_connector,
)
from employee_manager.validation import validate

configure_logging(config.LOG_LEVEL, config.LOG_JSON)
logger = structlog.get_logger(__name__)

# Initialize the Flask application
app = Flask(__name__)
app.secret_key = config.SECRET_KEY  # Necessary for flash messages

# One connection per operation; nothing is held between requests
repository = EmployeeRepository(mysql_connector(config.db_config))

# User-facing messages; driver details only ever go to the log
CONNECTION_ERROR = "Database connection error. Please try again later."
LIST_ERROR = "Unable to retrieve employee data."
INSERT_ERROR = "Failed to add employee. Please try again."
UPDATE_ERROR = "Failed to update employee. Please try again."


def _employee_id():
    """The `?id=` query argument as an int, or 400."""
    employee_id = request.args.get('id', type=int)
    if employee_id is None:
        abort(400)
    return employee_id


def _render_form(action, form_action, values=None, errors=None, status=200):
    return render_template('employee_form.html',
                           action=action,
                           form_action=form_action,
                           values=values or {},
                           errors=errors or []), status


# --- ERROR HANDLERS ---

@app.errorhandler(ConnectionFailure)
def handle_connection_failure(e):
    return render_template('error.html', message=CONNECTION_ERROR), 503


@app.errorhandler(QueryFailed)
def handle_query_failed(e):
    return render_template('error.html', message=LIST_ERROR), 500


# --- ROUTES ---

@app.route('/')
def list_employees():
    """Lists every employee, newest first."""
    error_message = None
    try:
        employees = repository.list_all()
    except QueryFailed:
        # Keep the page up, but don't pretend the table is empty
        employees = []
        error_message = LIST_ERROR

    return render_template('index.html',
                           employees=employees,
                           error_message=error_message,
                           success=request.args.get('success') == '1')


@app.route('/create', methods=['GET', 'POST'])
def create_employee():
    """Displays the new-employee form and handles its submission."""
    form_action = url_for('create_employee')
    if request.method == 'GET':
        return _render_form('Add', form_action)

    result = validate(request.form)
    if not result.ok:
        return _render_form('Add', form_action, result.values, result.messages)

    if repository.insert(result.record):
        logger.info("employee_created")
        # Redirect to prevent form resubmission
        return redirect(url_for('list_employees', success=1))

    return _render_form('Add', form_action, result.values, [INSERT_ERROR])


@app.route('/edit', methods=['GET', 'POST'])
def edit_employee():
    """Shows an employee in the form and saves the edited fields."""
    employee_id = _employee_id()
    form_action = url_for('edit_employee', id=employee_id)

    if request.method == 'GET':
        employee = repository.get(employee_id)
        if employee is None:
            flash('Employee not found!', 'danger')
            return redirect(url_for('list_employees'))
        values = {
            'name': employee.name,
            'email': employee.email,
            'phone': employee.phone,
            'address': employee.address,
        }
        return _render_form('Edit', form_action, values)

    result = validate(request.form)
    if not result.ok:
        return _render_form('Edit', form_action, result.values, result.messages)

    if repository.update(employee_id, result.record):
        flash('Employee updated successfully!', 'success')
        return redirect(url_for('list_employees'))

    return _render_form('Edit', form_action, result.values, [UPDATE_ERROR])


@app.route('/delete', methods=['POST'])
def delete_employee():
    employee_id = _employee_id()
    if repository.delete(employee_id):
        flash('Employee deleted successfully!', 'success')
    else:
        flash('Failed to delete employee.', 'danger')
    return redirect(url_for('list_employees'))


# --- CLI ---

@app.cli.command('init-db')
def init_db_command():
    """Create the employee table if it does not exist yet."""
    with app.open_resource('schema.sql') as f:
        statements = [s.strip() for s in f.read().decode('utf-8').split(';') if s.strip()]

    with repository.connection() as conn:
        with conn.cursor() as cursor:
            for statement in statements:
                cursor.execute(statement)
        conn.commit()
    click.echo('Initialized the database.')


# --- RUN THE APPLICATION ---

if __name__ == '__main__':
    app.run(debug=config.DEBUG)
