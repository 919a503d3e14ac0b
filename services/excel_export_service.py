"""
Excel export service for the Results Engine
Builds downloadable result sheets for a course assignment
"""

import logging
from io import BytesIO

import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter

logger = logging.getLogger(__name__)

class ExcelExportService:
    """Service for exporting result sheets to Excel"""
    
    @staticmethod
    def style_header_row(ws, row_num, columns):
        """Apply styling to header row"""
        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="000000", end_color="000000", fill_type="solid")
        header_alignment = Alignment(horizontal="center", vertical="center")
        
        for col_num, header in enumerate(columns, 1):
            cell = ws.cell(row=row_num, column=col_num, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = header_alignment
    
    @staticmethod
    def auto_adjust_columns(ws):
        """Auto-adjust column widths"""
        for column in ws.columns:
            max_length = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
            column_letter = get_column_letter(column[0].column)
            ws.column_dimensions[column_letter].width = min(max_length + 2, 50)
    
    @staticmethod
    def export_course_results(report):
        """Build a workbook from ResultService.get_course_results output"""
        assignment = report['assignment']
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Results"
        
        # Course info table
        ExcelExportService.style_header_row(ws, 1, ['Field', 'Value'])
        info = [
            ('Course', f"{assignment['course_code']} - {assignment['course_title']}"),
            ('Lecturer', assignment['lecturer_name']),
            ('Academic Year', assignment['academic_year']),
            ('Semester', assignment['semester']),
            ('Credit Units', assignment['credit_units']),
            ('Results Submitted', 'Yes' if assignment['results_submitted'] else 'No'),
            ('Results Approved', 'Yes' if assignment['results_approved'] else 'No'),
        ]
        for offset, (label, value) in enumerate(info, 2):
            ws.cell(row=offset, column=1, value=label)
            ws.cell(row=offset, column=2, value=value)
        
        # Student results table
        header_row = len(info) + 3
        headers = ['Student ID', 'Student Name', 'Assessments', 'Total Weight', 'Percentage',
                   'Letter Grade', 'Grade Points', 'Attendance %', 'Status']
        ExcelExportService.style_header_row(ws, header_row, headers)
        
        row = header_row + 1
        for entry in report['students_with_results']:
            student = entry['student'] or {}
            result = entry['result']
            ws.cell(row=row, column=1, value=student.get('student_id'))
            ws.cell(row=row, column=2, value=student.get('name'))
            if result:
                ws.cell(row=row, column=3, value=", ".join(
                    f"{a['name']} {a['obtained_score']:g}/{a['max_score']:g} ({a['weight']:g}%)"
                    for a in result['assessments']))
                ws.cell(row=row, column=4, value=result['total_weight'])
                ws.cell(row=row, column=5, value=result['percentage'])
                ws.cell(row=row, column=6, value=result['letter_grade'])
                ws.cell(row=row, column=7, value=result['grade_points'])
                ws.cell(row=row, column=8, value=result['attendance']['attendance_percentage'])
                ws.cell(row=row, column=9, value=result['status'])
            else:
                ws.cell(row=row, column=9, value='not graded')
            row += 1
        
        ExcelExportService.auto_adjust_columns(ws)
        logger.info(f"Exported result sheet for assignment {assignment['id']} ({row - header_row - 1} rows)")
        return wb
    
    @staticmethod
    def workbook_to_bytes(workbook):
        """Convert workbook to bytes for download"""
        output = BytesIO()
        workbook.save(output)
        output.seek(0)
        return output.getvalue()
