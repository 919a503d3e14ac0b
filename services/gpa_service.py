"""
GPA service for the Results Engine
Read-side GPA computation over published results
"""

from models.academic import SEMESTERS
from models.student import Student
from utils.db_helpers import get_or_404

class GPAService:
    """Credit-weighted grade point averages, recomputed on every call"""
    
    @staticmethod
    def calculate(results):
        """Aggregate a list of published results into a GPA summary.

        Incomplete and Withdrawn results count toward credits attempted only.
        """
        total_points = 0.0
        graded_credits = 0
        credits_attempted = 0
        credits_earned = 0
        
        for result in results:
            credits = result.credits or 0
            credits_attempted += credits
            if result.is_non_graded() or result.grade_points is None:
                continue
            total_points += result.grade_points * credits
            graded_credits += credits
            if result.grade_points > 0:
                credits_earned += credits
        
        gpa = round(total_points / graded_credits, 2) if graded_credits > 0 else 0.0
        
        return {
            'gpa': gpa,
            'total_grade_points': round(total_points, 2),
            'graded_credits': graded_credits,
            'credits_attempted': credits_attempted,
            'credits_earned': credits_earned,
            'course_count': len(results)
        }
    
    @staticmethod
    def _published_results(student_id, academic_year=None, semester=None):
        student = get_or_404(Student, student_id, 'Student')
        return student.get_published_results(academic_year, semester)
    
    @staticmethod
    def semester_gpa(student_id, academic_year, semester):
        """GPA summary over a student's published results in one period"""
        summary = GPAService.calculate(GPAService._published_results(student_id, academic_year, semester))
        summary['academic_year'] = academic_year
        summary['semester'] = semester
        return summary
    
    @staticmethod
    def overall_gpa(student_id):
        """Cumulative GPA summary over all of a student's published results"""
        return GPAService.calculate(GPAService._published_results(student_id))
    
    @staticmethod
    def transcript(student_id):
        """Published results grouped per academic period with running cumulative GPA"""
        student = get_or_404(Student, student_id, 'Student')
        results = student.get_published_results()
        
        periods = {}
        for result in results:
            periods.setdefault((result.academic_year, result.semester), []).append(result)
        
        ordered_keys = sorted(periods, key=lambda key: (key[0], SEMESTERS.index(key[1]) if key[1] in SEMESTERS else len(SEMESTERS)))
        
        terms = []
        seen = []
        for academic_year, semester in ordered_keys:
            term_results = periods[(academic_year, semester)]
            seen.extend(term_results)
            terms.append({
                'academic_year': academic_year,
                'semester': semester,
                'results': [r.to_dict(include_assessments=False) for r in term_results],
                'semester_gpa': GPAService.calculate(term_results)['gpa'],
                'cumulative_gpa': GPAService.calculate(seen)['gpa']
            })
        
        return {
            'student': student.to_dict(),
            'terms': terms,
            'overall': GPAService.calculate(results)
        }
