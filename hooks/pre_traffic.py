import json
import boto3
import os
import logging

logger = logging.getLogger()
logger.setLevel(logging.INFO)

codedeploy = boto3.client('codedeploy')
lambda_client = boto3.client('lambda')


def build_smoke_test_event(path):
    """
    Function URL event the new version must reject with 400.

    A GET never reaches the message builder, so no email is sent.
    """
    return {
        'version': '2.0',
        'rawPath': path,
        'headers': {},
        'requestContext': {
            'http': {
                'method': 'GET',
                'path': path
            }
        },
        'isBase64Encoded': False
    }


def lambda_handler(event, context):
    """
    Pre-traffic hook for CodeDeploy.
    Runs validation tests before shifting traffic to new version.
    """
    logger.info(f"Pre-traffic hook triggered: {json.dumps(event)}")

    deployment_id = event['DeploymentId']
    lifecycle_event_hook_execution_id = event['LifecycleEventHookExecutionId']

    try:
        target_function = os.environ.get('TARGET_FUNCTION')
        path = os.environ.get('PATH_NAME', '/send')

        logger.info(f"Running smoke tests on {target_function}")

        response = lambda_client.invoke(
            FunctionName=target_function,
            InvocationType='RequestResponse',
            Payload=json.dumps(build_smoke_test_event(path))
        )

        response_payload = json.loads(response['Payload'].read())
        logger.info(f"Test response: {json.dumps(response_payload)}")

        if response.get('FunctionError'):
            raise Exception(f"Function returned error: {response_payload}")

        if response.get('StatusCode') != 200:
            raise Exception(f"Unexpected status code: {response.get('StatusCode')}")

        if response_payload.get('statusCode') != 400:
            raise Exception(f"Invalid response status: {response_payload.get('statusCode')}")

        body = json.loads(response_payload.get('body', '{}'))
        if body.get('error') != 'Invalid request':
            raise Exception(f"Unexpected response body: {body}")

        logger.info("Pre-traffic validation passed")

        codedeploy.put_lifecycle_event_hook_execution_status(
            deploymentId=deployment_id,
            lifecycleEventHookExecutionId=lifecycle_event_hook_execution_id,
            status='Succeeded'
        )

        return {
            'statusCode': 200,
            'body': json.dumps('Pre-traffic validation succeeded')
        }

    except Exception as e:
        logger.error(f"Pre-traffic validation failed: {str(e)}", exc_info=True)

        # Report failure - this will prevent deployment
        codedeploy.put_lifecycle_event_hook_execution_status(
            deploymentId=deployment_id,
            lifecycleEventHookExecutionId=lifecycle_event_hook_execution_id,
            status='Failed'
        )

        return {
            'statusCode': 500,
            'body': json.dumps(f'Pre-traffic validation failed: {str(e)}')
        }
