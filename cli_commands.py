"""
Flask CLI commands for the Results Engine
"""

import logging

import click
from flask import Flask

from database import init_db, reset_database

logger = logging.getLogger(__name__)

def register_cli_commands(app: Flask):
    """Register CLI commands with the Flask app"""
    
    @app.cli.command("init-db")
    @click.option("--reset", is_flag=True, help="Drop and recreate every table")
    def init_db_command(reset):
        """Create tables and the default admin account"""
        if reset:
            click.confirm("This will delete all existing data. Continue?", abort=True)
            reset_database(app)
        else:
            init_db(app)
        click.echo("Database ready")
    
    @app.cli.command("seed-sample-data")
    def seed_sample_data_command():
        """Create sample staff, courses, students and assignments"""
        from sample_data import create_sample_data
        if create_sample_data():
            click.echo("Sample data created")
        else:
            click.echo("Sample data already present")
    
    @app.cli.command("student-gpa")
    @click.argument("student_number")
    @click.option("--academic-year", help="Academic year, e.g. 2024/2025")
    @click.option("--semester", type=click.Choice(['First', 'Second', 'Summer']))
    def student_gpa_command(student_number, academic_year, semester):
        """Print a student's GPA from published results"""
        from models.student import Student
        from services.gpa_service import GPAService
        
        student = Student.query.filter_by(student_id=student_number).first()
        if not student:
            raise click.ClickException(f"Student '{student_number}' not found")
        
        if academic_year and semester:
            summary = GPAService.semester_gpa(student.id, academic_year, semester)
            label = f"{academic_year} {semester}"
        elif academic_year or semester:
            raise click.UsageError("Give both --academic-year and --semester, or neither")
        else:
            summary = GPAService.overall_gpa(student.id)
            label = "overall"
        
        click.echo(f"{student.student_id} {student.name} ({label})")
        click.echo(f"  GPA:               {summary['gpa']:.2f}")
        click.echo(f"  Graded credits:    {summary['graded_credits']}")
        click.echo(f"  Credits attempted: {summary['credits_attempted']}")
        click.echo(f"  Courses:           {summary['course_count']}")
