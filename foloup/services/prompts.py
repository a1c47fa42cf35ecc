"""Prompt templates sent to the LLM providers."""

ATS_SYSTEM_PROMPT = (
    "You are an Applicant Tracking System (ATS). You compare resumes against job "
    "descriptions and reply only with JSON."
)


def ats_match_prompt(resume_text: str, job_description: str) -> str:
    return f"""Act as an Applicant Tracking System (ATS).
Compare the candidate resume provided below against the job description.
Perform the following steps:

1. Identify and list the key skills required from the job description.
2. From the candidate's resume, check which of those key skills are missing.
3. Provide a list of only the missing skills.
4. Give a 1-2 line feedback summary highlighting the strengths and weaknesses of the resume.
5. Assign a match score out of 100 based on how well the resume fits the job description.

Here is the Resume text:
{resume_text}

Here is the Job Description:
{job_description}

Respond strictly in the following JSON format:
{{
  "missing_skills": ["skill1", "skill2"],
  "match_score": 85,
  "feedback": "The candidate has a strong foundation but is missing expertise in cloud technologies."
}}"""


def contact_info_prompt(resume_text: str) -> str:
    return f"""Act as a resume parser. Extract the candidate's contact information from the resume text below.

Extract the following information:
1. Full Name (first and last name)
2. Email address
3. Phone number (if available)

Here is the Resume text:
{resume_text}

Respond strictly in the following JSON format:
{{
  "name": "John Doe",
  "email": "john.doe@email.com",
  "phone": "+1-555-123-4567"
}}

If any information is missing or unclear, use "not found" for that field.
Only extract information that is clearly present in the resume."""


RESUME_ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert ATS (Applicant Tracking System) analyst. "
    "Provide detailed resume analysis in JSON format."
)


def resume_analysis_prompt(job_title: str, job_description: str, resume_content: str) -> str:
    return f"""Analyze this resume for the following job position:

Job Title: {job_title}
Job Description: {job_description}

Resume Content: {resume_content}

Please provide a comprehensive ATS analysis including:
1. Overall match score (0-100)
2. Skills match score (0-100)
3. Experience match score (0-100)
4. Education match score (0-100)
5. Technical skills found
6. Soft skills identified
7. Experience summary
8. Education summary
9. Specific recommendations for improvement

Format your response as JSON with the following structure:
{{
  "overall_score": 85,
  "skills_match": 90,
  "experience_match": 80,
  "education_match": 75,
  "technical_skills": ["JavaScript", "React", "Node.js"],
  "soft_skills": ["Communication", "Teamwork", "Problem Solving"],
  "experience_summary": "5+ years of software development experience",
  "education_summary": "Bachelor's in Computer Science",
  "recommendations": [
    "Highlight relevant project experience",
    "Add more specific technical skills"
  ]
}}"""


QUESTIONS_SYSTEM_PROMPT = (
    "You are an expert in coming up with follow up questions to uncover deeper "
    "insights. You design interview questions for AI-led screening interviews."
)


def generate_questions_prompt(
    name: str, objective: str, number: int, context: str
) -> str:
    return f"""Imagine you are an interviewer specialized in designing interview questions to help hiring managers find candidates with strong technical expertise and project experience, making it easier to identify the ideal fit for the role.

Interview Title: {name}
Interview Objective: {objective}

Number of questions to be generated: {number}

Follow these detailed guidelines when crafting the questions:
- Focus on evaluating the candidate's technical knowledge and their experience working on relevant projects.
- Include questions designed to assess problem-solving skills through practical examples.
- Soft skills such as communication and teamwork should not be the main focus, but can be addressed briefly.
- Maintain a professional yet approachable tone.
- Keep each question concise, no more than 30 words.

Use the following context to generate the questions:
{context}

Also write a second-person description of the interview, about 50 words, to be shown to the candidate. Do not mention the number of questions.

Respond strictly in the following JSON format:
{{
  "questions": [{{"question": "..."}}],
  "description": "..."
}}"""


ANALYTICS_SYSTEM_PROMPT = (
    "You are an expert in analyzing interview transcripts. You must only use the "
    "main questions provided and not generate or infer additional questions."
)


def interview_analytics_prompt(transcript: str, main_questions: str) -> str:
    return f"""Analyse the following interview transcript and provide structured feedback:

###
Transcript: {transcript}

Main Interview Questions:
{main_questions}

Based on this transcript and the provided main interview questions, generate the following analytics in JSON format:
1. Overall Score (0-100) and Overall Feedback (60 words) - take into account:
   - Communication skills
   - Time taken to answer
   - Confidence and clarity
   - Job-specific knowledge
2. Communication Skills: Score (0-10) and Feedback (60 words).
3. Summary for each main interview question.
4. Create a 10 to 15 words summary regarding the soft skills considering factors such as confidence, leadership, adaptability, critical thinking and decision making.

Respond strictly in the following JSON format:
{{
  "overall_score": 0,
  "overall_feedback": "",
  "communication": {{"score": 0, "feedback": ""}},
  "question_summaries": [{{"question": "", "summary": ""}}],
  "soft_skill_summary": ""
}}"""


COMMUNICATION_SYSTEM_PROMPT = (
    "You are an expert in analyzing communication skills from interview transcripts."
)


def communication_analysis_prompt(transcript: str) -> str:
    return f"""Analyze the communication skills demonstrated in the following interview transcript:

{transcript}

Assess clarity, articulation, confidence, active listening and professionalism.
Quote short supporting examples from the transcript.

Respond strictly in the following JSON format:
{{
  "communication_score": 0,
  "overall_feedback": "",
  "supporting_quotes": [{{"quote": "", "analysis": "", "type": "strength"}}],
  "improvement_areas": [""]
}}"""


INSIGHTS_SYSTEM_PROMPT = (
    "You are an expert in uncovering deeper insights from interview call summaries."
)


def insights_prompt(
    call_summaries: str, interview_name: str, objective: str, description: str
) -> str:
    return f"""Imagine you are an interviewer who is an expert in uncovering deeper insights from call summaries.
Use the list of call summaries and the interview details below to generate insights.

###
Call Summaries: {call_summaries}

###
Interview Title: {interview_name}
Interview Objective: {objective}
Interview Description: {description}

Give 3 insights from the call summaries that highlight user feedback. Only output the insights. Do not include user names in the insights.
Make sure each insight is 25 words or less.

Respond strictly in the following JSON format:
{{
  "insights": ["...", "...", "..."]
}}"""
