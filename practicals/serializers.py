from rest_framework import serializers


class StudentDataSerializer(serializers.Serializer):
    """
    Данные студента из шапки. Для экспорта все три поля обязательны и непустые,
    других проверок нет.
    """

    name = serializers.CharField(allow_blank=False, trim_whitespace=True)
    rollNo = serializers.CharField(allow_blank=False, trim_whitespace=True)
    course = serializers.CharField(allow_blank=False, trim_whitespace=True)


class PracticalsFormSerializer(StudentDataSerializer):
    """
    Только для OpenAPI-схемы: описание плоской multipart-формы.
    Остальные ключи practical_* разбираются вручную (см. services/transport.py).
    """

    practical_0_no = serializers.CharField(required=False, allow_blank=True)
    practical_0_aim = serializers.CharField(required=False, allow_blank=True)
    practical_0_conclusion = serializers.CharField(required=False, allow_blank=True)
    practical_0_question_0_number = serializers.CharField(required=False, allow_blank=True)
    practical_0_question_0_questionText = serializers.CharField(required=False, allow_blank=True)
    practical_0_question_0_code = serializers.CharField(required=False, allow_blank=True)
    practical_0_output_0 = serializers.FileField(required=False)
